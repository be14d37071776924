"""
Use Cases (Application Services) do Domínio de Protocolos.

Este módulo contém os casos de uso que orquestram o ciclo de vida de
protocolos coordenando entidades, repositórios, AuditGate e eventos.

Use Cases implementados:
- CriarProtocoloService: Abre protocolo (manual ou por escalonamento)
- IniciarProtocoloService: ABERTO/REABERTO → EM_ANDAMENTO
- SubmeterResolucaoService: EM_ANDAMENTO → RESOLVIDO_PENDENTE
- AprovarResolucaoService: RESOLVIDO_PENDENTE → FECHADO
- RejeitarResolucaoService: RESOLVIDO_PENDENTE → EM_ANDAMENTO
- AguardarProtocoloService: EM_ANDAMENTO → AGUARDANDO_*
- RetomarProtocoloService: AGUARDANDO_* → EM_ANDAMENTO
- ReabrirProtocoloService: FECHADO → REABERTO
- AdicionarNotaService: Nota livre no histórico
- ReatribuirProtocoloService: Troca de responsável
- ObterProtocoloService / ListarProtocolosService / ListarEventosService
- EstatisticasService: Contagens por status e atraso

Fluxo comum das transições:
1. Resolver o ator no cadastro de operadores
2. Ler o estado atual do protocolo (nunca uma cópia em cache)
3. Validar e aplicar a transição na entidade
4. Regravar condicionalmente (status e versão lidos no passo 2)
5. Gravar o item de histórico na mesma transação
6. Enfileirar Domain Event para publicação após commit
"""

import logging
from typing import List, Optional

from src.core.auditoria.entities import TipoChamada
from src.core.auditoria.gate import AuditGate
from src.core.operadores.entities import OperadorEntity
from src.core.operadores.ports import OperadorRepository, carregar_ator
from src.core.shared.exceptions import (
    AuthorizationError,
    EntityNotFoundError,
    PersistenceError,
    ValidationError,
)
from src.core.shared.interfaces import Clock, UnitOfWork

from .dtos import (
    AdicionarNotaInputDTO,
    AguardarProtocoloInputDTO,
    CriarProtocoloInputDTO,
    EstatisticasOutputDTO,
    FiltroProtocolos,
    ListarProtocolosQueryDTO,
    ProtocoloEventoOutputDTO,
    ProtocoloOutputDTO,
    ReabrirProtocoloInputDTO,
    ReatribuirProtocoloInputDTO,
    RejeitarResolucaoInputDTO,
    SubmeterResolucaoInputDTO,
    TransicaoProtocoloInputDTO,
)
from .entities import (
    ProtocoloEntity,
    ProtocoloEventoEntity,
    ProtocoloPriority,
    ProtocoloStatus,
)
from .events import (
    ProtocoloCriadoEvent,
    ProtocoloNotaAdicionadaEvent,
    ProtocoloReatribuidoEvent,
    ProtocoloStatusAlteradoEvent,
)
from .ports import ProtocoloEventoRepository, ProtocoloRepository
from .sla import SLAClock


logger = logging.getLogger(__name__)


def ordenar_fila(protocolos: List[ProtocoloEntity]) -> List[ProtocoloEntity]:
    """Alta prioridade primeiro, depois prazo de SLA crescente."""
    return sorted(
        protocolos,
        key=lambda p: (
            0 if p.prioridade == ProtocoloPriority.ALTA else 1,
            p.sla_prazo is None,
            p.sla_prazo or p.aberto_em,
        ),
    )


def _converter_tipo_chamada(valor: Optional[str]) -> Optional[TipoChamada]:
    if not valor:
        return None
    try:
        return TipoChamada.from_string(valor)
    except ValueError:
        raise ValidationError(
            f"Tipo de chamada inválido: {valor}",
            field="origem_tipo_chamada",
        )


class CriarProtocoloService:
    """
    Use Case: Abrir um novo protocolo.

    Também é o caminho usado pelo fluxo de atendimento para escalonar
    uma chamada em protocolo.

    Fluxo:
    1. Resolver ator e responsável (ativo)
    2. Calcular prazo de SLA pela prioridade
    3. Gerar número humano único
    4. Persistir protocolo e item "created" do histórico
    5. Disparar evento ProtocoloCriado

    Example:
        service = CriarProtocoloService(
            protocolo_repo, evento_repo, operador_repo, SLAClock(), uow, clock
        )
        output = service.execute(CriarProtocoloInputDTO(
            ator_id="op1",
            titulo="Vazamento",
            descricao="Vazamento na bomba após instalação",
            departamento_id="d3",
            prioridade="ALTA",
            cliente_id="c1",
        ))
        print(output.numero)  # PRX7K2Q
    """

    TENTATIVAS_NUMERO = 10

    def __init__(
        self,
        protocolo_repo: ProtocoloRepository,
        evento_repo: ProtocoloEventoRepository,
        operador_repo: OperadorRepository,
        sla: SLAClock,
        uow: UnitOfWork,
        clock: Clock,
    ):
        """
        Inicializa service com dependências injetadas.

        Args:
            protocolo_repo: Repositório de protocolos
            evento_repo: Histórico de protocolos
            operador_repo: Cadastro de operadores
            sla: Política de SLA configurada
            uow: Unit of Work para transação atômica
            clock: Fonte de tempo
        """
        self.protocolo_repo = protocolo_repo
        self.evento_repo = evento_repo
        self.operador_repo = operador_repo
        self.sla = sla
        self.uow = uow
        self.clock = clock

    def execute(self, input_dto: CriarProtocoloInputDTO) -> ProtocoloOutputDTO:
        """
        Executa abertura de protocolo em transação atômica.

        Raises:
            AuthorizationError: Se ator desconhecido ou inativo
            ValidationError: Se dados inválidos ou responsável inativo
            ConfigurationError: Se a política de SLA não cobre a prioridade
        """
        with self.uow:
            ator = carregar_ator(self.operador_repo, input_dto.ator_id)

            try:
                prioridade = ProtocoloPriority.from_string(input_dto.prioridade or "")
            except ValueError:
                raise ValidationError(
                    f"Prioridade inválida: {input_dto.prioridade}",
                    field="prioridade",
                )

            origem = _converter_tipo_chamada(input_dto.origem_tipo_chamada)
            responsavel_id = self._resolver_responsavel(ator, input_dto.responsavel_id)

            agora = self.clock.agora()
            protocolo = ProtocoloEntity.criar(
                aberto_por_id=ator.id,
                departamento_id=input_dto.departamento_id,
                titulo=input_dto.titulo,
                descricao=input_dto.descricao,
                prioridade=prioridade,
                aberto_em=agora,
                sla_prazo=self.sla.prazo(prioridade, agora),
                cliente_id=input_dto.cliente_id,
                prospect_id=input_dto.prospect_id,
                responsavel_id=responsavel_id,
                origem_tipo_chamada=origem,
                numero=self._gerar_numero_unico(),
            )

            self.protocolo_repo.add(protocolo)
            self.evento_repo.append(protocolo.evento_criacao())

            self.uow.publish_event(
                ProtocoloCriadoEvent(
                    aggregate_id=protocolo.id,
                    numero=protocolo.numero,
                    aberto_por_id=protocolo.aberto_por_id,
                    responsavel_id=protocolo.responsavel_id,
                    departamento_id=protocolo.departamento_id,
                    prioridade=protocolo.prioridade.value,
                    sla_prazo=protocolo.sla_prazo.isoformat(),
                    origem_tipo_chamada=origem.value if origem else None,
                )
            )

        logger.info(f"Protocolo {protocolo.numero} aberto por {ator.id}")
        return ProtocoloOutputDTO.from_entity(protocolo, agora)

    def _resolver_responsavel(
        self,
        ator: OperadorEntity,
        responsavel_id: Optional[str],
    ) -> str:
        if not responsavel_id or responsavel_id == ator.id:
            return ator.id

        responsavel = self.operador_repo.get_by_id(responsavel_id)
        if responsavel is None or not responsavel.ativo:
            raise ValidationError(
                f"Responsável {responsavel_id} não é um operador ativo",
                field="responsavel_id",
            )
        return responsavel.id

    def _gerar_numero_unico(self) -> str:
        for _ in range(self.TENTATIVAS_NUMERO):
            numero = ProtocoloEntity.gerar_numero()
            if not self.protocolo_repo.exists_numero(numero):
                return numero
        raise PersistenceError("Não foi possível gerar número de protocolo único")


class _TransicaoProtocoloService:
    """
    Base das transições sobre protocolo existente.

    Concentra leitura do estado atual, gravação condicional e
    gravação do histórico na mesma transação.
    """

    def __init__(
        self,
        protocolo_repo: ProtocoloRepository,
        evento_repo: ProtocoloEventoRepository,
        operador_repo: OperadorRepository,
        uow: UnitOfWork,
        clock: Clock,
    ):
        self.protocolo_repo = protocolo_repo
        self.evento_repo = evento_repo
        self.operador_repo = operador_repo
        self.uow = uow
        self.clock = clock

    def _carregar_protocolo(self, referencia: str) -> ProtocoloEntity:
        protocolo = self.protocolo_repo.get_by_id_ou_numero(referencia)
        if not protocolo:
            raise EntityNotFoundError(
                f"Protocolo {referencia} não encontrado",
                entity_type="Protocolo",
                entity_id=referencia,
            )
        return protocolo

    def _gravar(
        self,
        protocolo: ProtocoloEntity,
        status_lido: ProtocoloStatus,
        versao_lida: int,
        evento: ProtocoloEventoEntity,
    ) -> ProtocoloEventoEntity:
        self.protocolo_repo.update(protocolo, status_lido, versao_lida)
        return self.evento_repo.append(evento)

    def _publicar_status(self, protocolo: ProtocoloEntity, evento: ProtocoloEventoEntity) -> None:
        self.uow.publish_event(
            ProtocoloStatusAlteradoEvent(
                aggregate_id=protocolo.id,
                numero=protocolo.numero,
                status_anterior=evento.valor_antigo or "",
                status_novo=evento.valor_novo or "",
                ator_id=evento.ator_id,
                responsavel_id=protocolo.responsavel_id,
                nota=evento.nota,
            )
        )

    def _saida(self, protocolo: ProtocoloEntity) -> ProtocoloOutputDTO:
        return ProtocoloOutputDTO.from_entity(protocolo, self.clock.agora())


class IniciarProtocoloService(_TransicaoProtocoloService):
    """Use Case: Responsável inicia o atendimento do protocolo."""

    def execute(self, input_dto: TransicaoProtocoloInputDTO) -> ProtocoloOutputDTO:
        """
        Raises:
            EntityNotFoundError: Se protocolo não existe
            StateError: Se status não é ABERTO/REABERTO
            AuthorizationError: Se ator não é o responsável
        """
        with self.uow:
            ator = carregar_ator(self.operador_repo, input_dto.ator_id)
            protocolo = self._carregar_protocolo(input_dto.protocolo_ref)
            status_lido, versao_lida = protocolo.status, protocolo.versao

            evento = protocolo.iniciar(ator, self.clock.agora())
            self._gravar(protocolo, status_lido, versao_lida, evento)
            self._publicar_status(protocolo, evento)

        logger.info(f"Protocolo {protocolo.numero} iniciado por {ator.id}")
        return self._saida(protocolo)


class SubmeterResolucaoService(_TransicaoProtocoloService):
    """
    Use Case: Responsável submete a resolução para aprovação.

    O checklist de fechamento é validado pelo AuditGate para o tipo de
    chamada de origem do protocolo. Tudo ou nada: com qualquer
    pendência nada é gravado.
    """

    def __init__(
        self,
        protocolo_repo: ProtocoloRepository,
        evento_repo: ProtocoloEventoRepository,
        operador_repo: OperadorRepository,
        audit_gate: AuditGate,
        uow: UnitOfWork,
        clock: Clock,
    ):
        super().__init__(protocolo_repo, evento_repo, operador_repo, uow, clock)
        self.audit_gate = audit_gate

    def execute(self, input_dto: SubmeterResolucaoInputDTO) -> ProtocoloOutputDTO:
        """
        Raises:
            EntityNotFoundError: Se protocolo não existe
            StateError: Se status não é EM_ANDAMENTO
            AuthorizationError: Se ator não é o responsável
            AuditoriaIncompletaError: Se o checklist tem pendências
            ValidationError: Se resumo vazio ou pergunta desconhecida
        """
        with self.uow:
            ator = carregar_ator(self.operador_repo, input_dto.ator_id)
            protocolo = self._carregar_protocolo(input_dto.protocolo_ref)
            status_lido, versao_lida = protocolo.status, protocolo.versao

            protocolo.exigir_submissao(ator)
            if not input_dto.resumo or not input_dto.resumo.strip():
                raise ValidationError("Resumo da resolução é obrigatório", field="resumo")

            tipo = protocolo.origem_tipo_chamada
            resultado = self.audit_gate.exigir(tipo, input_dto.respostas)
            texto = self.audit_gate.compor_texto(tipo, input_dto.resumo, resultado.respostas)

            evento = protocolo.submeter_resolucao(ator, texto, self.clock.agora())
            self._gravar(protocolo, status_lido, versao_lida, evento)
            self._publicar_status(protocolo, evento)

        logger.info(f"Resolução do protocolo {protocolo.numero} submetida por {ator.id}")
        return self._saida(protocolo)


class AprovarResolucaoService(_TransicaoProtocoloService):
    """Use Case: Administrador aprova a resolução e fecha o protocolo."""

    def execute(self, input_dto: TransicaoProtocoloInputDTO) -> ProtocoloOutputDTO:
        with self.uow:
            ator = carregar_ator(self.operador_repo, input_dto.ator_id)
            protocolo = self._carregar_protocolo(input_dto.protocolo_ref)
            status_lido, versao_lida = protocolo.status, protocolo.versao

            evento = protocolo.aprovar(ator, self.clock.agora())
            self._gravar(protocolo, status_lido, versao_lida, evento)
            self._publicar_status(protocolo, evento)

        logger.info(f"Protocolo {protocolo.numero} fechado por {ator.id}")
        return self._saida(protocolo)


class RejeitarResolucaoService(_TransicaoProtocoloService):
    """
    Use Case: Administrador rejeita a resolução.

    O protocolo volta para EM_ANDAMENTO com o mesmo responsável e o
    prazo de SLA original.
    """

    def execute(self, input_dto: RejeitarResolucaoInputDTO) -> ProtocoloOutputDTO:
        with self.uow:
            ator = carregar_ator(self.operador_repo, input_dto.ator_id)
            protocolo = self._carregar_protocolo(input_dto.protocolo_ref)
            status_lido, versao_lida = protocolo.status, protocolo.versao

            evento = protocolo.rejeitar(ator, input_dto.motivo, self.clock.agora())
            self._gravar(protocolo, status_lido, versao_lida, evento)
            self._publicar_status(protocolo, evento)

        logger.info(f"Resolução do protocolo {protocolo.numero} rejeitada por {ator.id}")
        return self._saida(protocolo)


class AguardarProtocoloService(_TransicaoProtocoloService):
    """Use Case: Responsável coloca o protocolo em espera (setor ou cliente)."""

    def execute(self, input_dto: AguardarProtocoloInputDTO) -> ProtocoloOutputDTO:
        try:
            destino = ProtocoloStatus.from_string(input_dto.destino or "")
        except ValueError:
            raise ValidationError(
                f"Status de espera inválido: {input_dto.destino}",
                field="destino",
            )

        with self.uow:
            ator = carregar_ator(self.operador_repo, input_dto.ator_id)
            protocolo = self._carregar_protocolo(input_dto.protocolo_ref)
            status_lido, versao_lida = protocolo.status, protocolo.versao

            evento = protocolo.aguardar(ator, destino, self.clock.agora(), nota=input_dto.nota)
            self._gravar(protocolo, status_lido, versao_lida, evento)
            self._publicar_status(protocolo, evento)

        return self._saida(protocolo)


class RetomarProtocoloService(_TransicaoProtocoloService):
    """Use Case: Responsável retoma protocolo em espera."""

    def execute(self, input_dto: TransicaoProtocoloInputDTO) -> ProtocoloOutputDTO:
        with self.uow:
            ator = carregar_ator(self.operador_repo, input_dto.ator_id)
            protocolo = self._carregar_protocolo(input_dto.protocolo_ref)
            status_lido, versao_lida = protocolo.status, protocolo.versao

            evento = protocolo.retomar(ator, self.clock.agora())
            self._gravar(protocolo, status_lido, versao_lida, evento)
            self._publicar_status(protocolo, evento)

        return self._saida(protocolo)


class ReabrirProtocoloService(_TransicaoProtocoloService):
    """Use Case: Administrador reabre protocolo fechado."""

    def execute(self, input_dto: ReabrirProtocoloInputDTO) -> ProtocoloOutputDTO:
        with self.uow:
            ator = carregar_ator(self.operador_repo, input_dto.ator_id)
            protocolo = self._carregar_protocolo(input_dto.protocolo_ref)
            status_lido, versao_lida = protocolo.status, protocolo.versao

            evento = protocolo.reabrir(ator, self.clock.agora(), motivo=input_dto.motivo)
            self._gravar(protocolo, status_lido, versao_lida, evento)
            self._publicar_status(protocolo, evento)

        logger.info(f"Protocolo {protocolo.numero} reaberto por {ator.id}")
        return self._saida(protocolo)


class AdicionarNotaService(_TransicaoProtocoloService):
    """
    Use Case: Registrar nota livre no histórico.

    Qualquer operador ativo pode anotar protocolos não fechados; o
    status não muda.
    """

    def execute(self, input_dto: AdicionarNotaInputDTO) -> ProtocoloEventoOutputDTO:
        """
        Raises:
            ValidationError: Se texto vazio
            StateError: Se protocolo fechado
        """
        with self.uow:
            ator = carregar_ator(self.operador_repo, input_dto.ator_id)
            protocolo = self._carregar_protocolo(input_dto.protocolo_ref)
            status_lido, versao_lida = protocolo.status, protocolo.versao

            evento = protocolo.adicionar_nota(ator, input_dto.texto, self.clock.agora())
            gravado = self._gravar(protocolo, status_lido, versao_lida, evento)

            self.uow.publish_event(
                ProtocoloNotaAdicionadaEvent(
                    aggregate_id=protocolo.id,
                    numero=protocolo.numero,
                    ator_id=ator.id,
                    responsavel_id=protocolo.responsavel_id,
                )
            )

        return ProtocoloEventoOutputDTO.from_entity(gravado)


class ReatribuirProtocoloService(_TransicaoProtocoloService):
    """
    Use Case: Administrador troca o responsável do protocolo.

    Independe do status (exceto FECHADO) e não o altera.
    """

    def execute(self, input_dto: ReatribuirProtocoloInputDTO) -> ProtocoloOutputDTO:
        """
        Raises:
            AuthorizationError: Se ator não é administrador
            ValidationError: Se novo responsável não é operador ativo
            StateError: Se protocolo fechado
        """
        with self.uow:
            ator = carregar_ator(self.operador_repo, input_dto.ator_id)
            protocolo = self._carregar_protocolo(input_dto.protocolo_ref)
            status_lido, versao_lida = protocolo.status, protocolo.versao

            novo = self.operador_repo.get_by_id(input_dto.novo_responsavel_id or "")
            if novo is None:
                # Papel é checado antes de revelar se o operador existe
                protocolo.exigir_reatribuicao(ator)
                raise ValidationError(
                    f"Operador {input_dto.novo_responsavel_id} não encontrado",
                    field="novo_responsavel_id",
                )

            evento = protocolo.reatribuir(ator, novo, self.clock.agora())
            self._gravar(protocolo, status_lido, versao_lida, evento)

            self.uow.publish_event(
                ProtocoloReatribuidoEvent(
                    aggregate_id=protocolo.id,
                    numero=protocolo.numero,
                    responsavel_anterior_id=evento.valor_antigo or "",
                    responsavel_novo_id=novo.id,
                    ator_id=ator.id,
                )
            )

        logger.info(
            f"Protocolo {protocolo.numero} reatribuído de "
            f"{evento.valor_antigo} para {novo.id} por {ator.id}"
        )
        return self._saida(protocolo)


# =============================================================================
# Consultas
# =============================================================================

class _ConsultaProtocoloService:
    """Base das consultas: resolve o ator e aplica a visibilidade."""

    def __init__(
        self,
        protocolo_repo: ProtocoloRepository,
        operador_repo: OperadorRepository,
        clock: Clock,
    ):
        self.protocolo_repo = protocolo_repo
        self.operador_repo = operador_repo
        self.clock = clock

    def _carregar_visivel(self, referencia: str, ator: OperadorEntity) -> ProtocoloEntity:
        protocolo = self.protocolo_repo.get_by_id_ou_numero(referencia)
        if not protocolo:
            raise EntityNotFoundError(
                f"Protocolo {referencia} não encontrado",
                entity_type="Protocolo",
                entity_id=referencia,
            )
        if not protocolo.pode_ser_visto_por(ator):
            raise AuthorizationError(
                "Protocolo fora da sua carteira",
                actor_id=ator.id,
            )
        return protocolo

    def _listar_visiveis(
        self,
        ator: OperadorEntity,
        query: Optional[ListarProtocolosQueryDTO] = None,
    ) -> List[ProtocoloEntity]:
        query = query or ListarProtocolosQueryDTO()

        status = None
        if query.status:
            try:
                status = ProtocoloStatus.from_string(query.status)
            except ValueError:
                raise ValidationError(f"Status inválido: {query.status}", field="status")

        filtro = FiltroProtocolos(
            status=status,
            departamento_id=query.departamento_id or None,
            responsavel_id=query.responsavel_id or None,
            busca=query.busca or None,
            visivel_para=None if ator.e_administrador else ator.id,
        )
        protocolos = self.protocolo_repo.list(filtro)

        if query.apenas_atrasados:
            agora = self.clock.agora()
            protocolos = [p for p in protocolos if p.esta_atrasado(agora)]

        return protocolos


class ObterProtocoloService(_ConsultaProtocoloService):
    """Use Case: Obter protocolo por ID ou número."""

    def execute(self, referencia: str, ator_id: str) -> ProtocoloOutputDTO:
        """
        Raises:
            EntityNotFoundError: Se protocolo não existe
            AuthorizationError: Se protocolo fora da visibilidade do ator
        """
        ator = carregar_ator(self.operador_repo, ator_id)
        protocolo = self._carregar_visivel(referencia, ator)
        logger.debug(f"Protocolo {protocolo.numero} consultado por {ator.id}")
        return ProtocoloOutputDTO.from_entity(protocolo, self.clock.agora())


class ListarProtocolosService(_ConsultaProtocoloService):
    """
    Use Case: Listar protocolos visíveis ao ator.

    Não administradores só veem protocolos que abriram ou conduzem.
    Ordenação de fila: Alta primeiro, depois prazo de SLA crescente.
    """

    def execute(
        self,
        query: ListarProtocolosQueryDTO,
        ator_id: str,
    ) -> List[ProtocoloOutputDTO]:
        ator = carregar_ator(self.operador_repo, ator_id)
        protocolos = ordenar_fila(self._listar_visiveis(ator, query))
        agora = self.clock.agora()
        return [ProtocoloOutputDTO.from_entity(p, agora) for p in protocolos]


class ListarEventosService(_ConsultaProtocoloService):
    """
    Use Case: Histórico de um protocolo em ordem causal.

    A exibição pode inverter a ordem; a listagem nunca.
    """

    def __init__(
        self,
        protocolo_repo: ProtocoloRepository,
        evento_repo: ProtocoloEventoRepository,
        operador_repo: OperadorRepository,
        clock: Clock,
    ):
        super().__init__(protocolo_repo, operador_repo, clock)
        self.evento_repo = evento_repo

    def execute(self, referencia: str, ator_id: str) -> List[ProtocoloEventoOutputDTO]:
        ator = carregar_ator(self.operador_repo, ator_id)
        protocolo = self._carregar_visivel(referencia, ator)
        return [
            ProtocoloEventoOutputDTO.from_entity(e)
            for e in self.evento_repo.list_by_protocolo(protocolo.id)
        ]


class EstatisticasService(_ConsultaProtocoloService):
    """Use Case: Contagens por status e de protocolos atrasados."""

    def execute(self, ator_id: str) -> EstatisticasOutputDTO:
        ator = carregar_ator(self.operador_repo, ator_id)
        protocolos = self._listar_visiveis(ator)
        agora = self.clock.agora()

        por_status = {status.value: 0 for status in ProtocoloStatus}
        for protocolo in protocolos:
            por_status[protocolo.status.value] += 1

        return EstatisticasOutputDTO(
            por_status=por_status,
            atrasados=sum(1 for p in protocolos if p.esta_atrasado(agora)),
            total=len(protocolos),
        )
